import atexit
import logging
from datetime import timedelta
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.date import DateTrigger
from drainwise.extensions import db
from drainwise.services.errors import ServiceError
from drainwise.services.pr2_configuration_service import PR2ConfigurationService, load_payload
from drainwise.utils.timezone_utils import utc_now

logger = logging.getLogger(__name__)


class AutoSaveCoordinator:
    """
    Debounced single-slot writes.

    Each slot holds at most one pending job. Scheduling into a slot replaces
    whatever was waiting there, so a burst of edits produces one write after
    the burst settles. Pending jobs are not flushed on shutdown.
    """

    def __init__(self, delay_ms=500):
        self.delay_ms = delay_ms
        self.scheduler = BackgroundScheduler(timezone='UTC')

    def schedule(self, slot, func, delay_ms=None, args=None, kwargs=None):
        """Cancel any pending write for the slot and schedule func in its place."""
        delay_ms = self.delay_ms if delay_ms is None else delay_ms
        self.scheduler.add_job(
            func=func,
            trigger=DateTrigger(run_date=utc_now() + timedelta(milliseconds=delay_ms)),
            args=args or [],
            kwargs=kwargs or {},
            id=slot,
            name=f"Auto-save {slot}",
            replace_existing=True,
            misfire_grace_time=None,
        )
        logger.debug(f"Auto-save scheduled for {slot} in {delay_ms}ms")

    def pending(self, slot):
        return self.scheduler.get_job(slot) is not None

    def cancel(self, slot):
        """Abandon the pending write for a slot. Returns False when nothing was pending."""
        try:
            self.scheduler.remove_job(slot)
        except JobLookupError:
            return False
        logger.debug(f"Auto-save cancelled for {slot}")
        return True

    def flush(self, slot):
        """
        Run the pending write for a slot now, on the calling thread.

        Returns:
            (ran, result) tuple; ran is False when nothing was pending or the
            write is already due and belongs to the scheduler thread
        """
        job = self.scheduler.get_job(slot)
        if job is None:
            return False, None
        # The scheduler submits a due job before removing it from the store
        next_run_time = getattr(job, 'next_run_time', None)
        if next_run_time is not None and next_run_time <= utc_now():
            logger.debug(f"Auto-save for {slot} is already due, leaving it to the scheduler")
            return False, None
        try:
            self.scheduler.remove_job(slot)
        except JobLookupError:
            return False, None
        logger.debug(f"Auto-save flushed for {slot}")
        return True, job.func(*job.args, **job.kwargs)

    def start(self):
        """Start the scheduler"""
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info("Auto-save coordinator started")

    def shutdown(self):
        """Stop the scheduler, dropping pending writes"""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Auto-save coordinator stopped")

    def init_app(self, app):
        self.delay_ms = app.config.get('AUTOSAVE_DELAY_MS', self.delay_ms)
        app.extensions['autosave'] = self
        if app.config.get('AUTOSAVE_ENABLED', True):
            self.start()
            atexit.register(self.shutdown)


def configuration_slot(config_id, owner_id):
    return f"pr2-config:{owner_id}:{config_id}"


def save_configuration(app, config_id, owner_id, data):
    """Deferred full-replace update. Failures are logged, never raised."""
    with app.app_context():
        try:
            config = PR2ConfigurationService.update(config_id, owner_id, data)
            logger.info(f"Auto-saved configuration {config_id}")
            return config
        except ServiceError as se:
            logger.error(f"Auto-save failed for configuration {config_id}: {se.message}")
        except Exception as e:
            logger.error(f"Auto-save failed for configuration {config_id}: {e}", exc_info=True)
            db.session.rollback()
        return None


def schedule_configuration_save(app, coordinator, config_id, owner_id, data):
    """
    Validate an edit up front and queue it as the configuration's pending write.

    The record must exist and the payload must be well formed; the write
    itself happens after the settle delay.
    """
    PR2ConfigurationService.get_by_id(config_id, owner_id)
    load_payload(data)
    coordinator.schedule(
        configuration_slot(config_id, owner_id),
        save_configuration,
        args=[app, config_id, owner_id, data],
    )
    return coordinator.delay_ms
