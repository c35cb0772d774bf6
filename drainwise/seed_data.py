# Seed data for local development. Prices below are placeholders, not real rates.
import click
from flask import current_app
from flask.cli import with_appcontext
from drainwise.extensions import db
from drainwise.models.standard_category import StandardCategory
from drainwise.models.pr2_configuration import PR2Configuration
from drainwise.services.option_registry import default_options, empty_stack_order
from drainwise.services.sector_standards import generate_standard_description
from drainwise.services.standard_category_service import derive_category_id

DEFAULT_CATEGORIES = (
    'CCTV',
    'Jetting',
    'CCTV/Jet Vac',
    'Patching',
    'Lining',
    'Excavation',
    'Tankering',
    'Cutting',
)


# Helper: get or create
def get_or_create(model, defaults=None, **kwargs):
    instance = model.query.filter_by(**kwargs).first()
    if instance:
        return instance, False
    params = dict(kwargs)
    if defaults:
        params.update(defaults)
    instance = model(**params)
    db.session.add(instance)
    db.session.commit()
    return instance, True


def seed_standard_categories():
    """Insert the default standard categories that are missing. Returns the number created."""
    created = 0
    for name in DEFAULT_CATEGORIES:
        _, was_created = get_or_create(
            StandardCategory,
            defaults={
                'category_name': name,
                'description': generate_standard_description(name),
                'icon_name': 'Edit',
                'is_default': True,
                'is_active': True,
            },
            category_id=derive_category_id(name),
        )
        if was_created:
            created += 1
    return created


def seed_sample_configuration(owner_id):
    """A 150mm CCTV configuration to clone other pipe sizes from."""
    pricing = default_options('pricing')
    pricing['dayRate'] = {'enabled': True, 'value': '1850'}
    quantity = default_options('quantity')
    quantity['runsPerShift'] = {'enabled': True, 'value': '20'}
    _, was_created = get_or_create(
        PR2Configuration,
        defaults={
            'category_name': 'TP1 - 150mm CCTV',
            'description': 'Day Rate = £1850. Runs per Shift = 20',
            'category_color': '#93c5fd',
            'pricing_options': pricing,
            'quantity_options': quantity,
            'min_quantity_options': default_options('minQuantity'),
            'additional_options': default_options('additional'),
            'stack_order': empty_stack_order(),
            'math_operators': ['÷'],
            'range_values': {},
            'vehicle_travel_rates': [
                {'id': '1', 'vehicleType': '3.5t Van', 'hourlyRate': '55', 'numberOfHours': '2', 'enabled': True},
            ],
            'vehicle_travel_rates_stack_order': [],
            'is_active': True,
        },
        owner_id=owner_id,
        category_id='cctv',
        sector='utilities',
        pipe_size='150',
    )
    return was_created


@click.command('seed-categories')
@click.option('--with-sample', is_flag=True, help='Also create a sample CCTV configuration for the default owner.')
@with_appcontext
def seed_categories_command(with_sample):
    """Seed the default standard categories."""
    created = seed_standard_categories()
    click.echo(f'Standard categories created: {created} (total {StandardCategory.query.count()})')
    if with_sample:
        owner_id = current_app.config['DEFAULT_OWNER_ID']
        if seed_sample_configuration(owner_id):
            click.echo(f'Sample configuration created for {owner_id}')
        else:
            click.echo('Sample configuration already present')


def main():
    from drainwise.server import create_app

    app = create_app()
    with app.app_context():
        created = seed_standard_categories()
        seed_sample_configuration(app.config['DEFAULT_OWNER_ID'])
        print(f'Standard categories created: {created}')
        print(f'StandardCategories: {StandardCategory.query.count()}')
        print(f'PR2Configurations: {PR2Configuration.query.count()}')
        print('SUCCESS: Database seeded successfully!')


if __name__ == '__main__':
    main()
