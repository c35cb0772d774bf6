from flask import current_app, request, has_request_context


def get_current_owner_id():
    """
    Owner identity for the current request.

    There is no authentication yet: the owner comes from the X-Owner-Id
    header, falling back to the configured placeholder identity.
    """
    default_owner = current_app.config.get('DEFAULT_OWNER_ID', 'test-user')
    if not has_request_context():
        return default_owner
    header = current_app.config.get('OWNER_HEADER', 'X-Owner-Id')
    owner_id = (request.headers.get(header) or '').strip()
    return owner_id or default_owner
