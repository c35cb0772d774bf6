"""
Stack order reconciliation for dynamically keyed option sections.

The option map is the source of truth for values. The stack order is an
optional list of keys giving display and evaluation order; when it is empty
the natural (insertion) order of the map applies. Every structural change
goes through reconcile() so the two never drift apart.
"""
import re
from drainwise.services.errors import ValidationError, ConflictError, NotFoundError
from drainwise.services.option_registry import SECTIONS

_NON_ALNUM = re.compile(r'[^a-z0-9]')


def derive_option_key(name):
    """Machine key for a human option name: lowercase, alphanumerics only."""
    if not isinstance(name, str):
        raise ValidationError('Option name is required')
    key = _NON_ALNUM.sub('', name.lower())
    if not key:
        raise ValidationError(f"Option name '{name}' must contain at least one letter or digit")
    return key


def ordered_keys(options, stack_order):
    """
    Keys of an option map in effective order.

    Stale entries of the stack order are skipped and keys it does not know
    about are appended in natural order, so a transiently inconsistent
    record still renders every option exactly once.
    """
    if not stack_order:
        return list(options)
    keys = []
    for key in stack_order:
        if key in options and key not in keys:
            keys.append(key)
    keys.extend(key for key in options if key not in keys)
    return keys


def ordered_options(options, stack_order):
    return [(key, options[key]) for key in ordered_keys(options, stack_order)]


def reconcile(options, stack_order):
    """Repair a stack order against its map. An empty order stays empty."""
    if not stack_order:
        return []
    return ordered_keys(options, stack_order)


def reconcile_stack_orders(stack_order, sections):
    """
    Repair the stack order of every section.

    Args:
        stack_order: section -> key list as stored (may be partial or None)
        sections: section -> option map

    Returns:
        A new section -> key list dict covering every known section
    """
    stack_order = stack_order or {}
    return {
        section: reconcile(sections.get(section) or {}, stack_order.get(section))
        for section in SECTIONS
    }


def reconcile_rows(rows, stack_order):
    """Same repair for list rows identified by their 'id' field."""
    ids = {str(row.get('id')): None for row in rows or []}
    return reconcile(ids, stack_order)


def add_option(options, stack_order, name):
    key = derive_option_key(name)
    if key in options:
        raise ConflictError(f"Option '{key}' already exists in this section")
    new_options = dict(options)
    new_options[key] = {'enabled': False, 'value': ''}
    new_order = list(stack_order) + [key] if stack_order else []
    return key, new_options, reconcile(new_options, new_order)


def rename_option(options, stack_order, old_key, new_name):
    """Move an option to a new key, keeping its value and position."""
    if old_key not in options:
        raise NotFoundError(f"Option '{old_key}' not found")
    new_key = derive_option_key(new_name)
    if new_key == old_key:
        return old_key, dict(options), reconcile(options, stack_order)
    if new_key in options:
        raise ConflictError(f"Option '{new_key}' already exists in this section")
    new_options = {(new_key if key == old_key else key): value for key, value in options.items()}
    new_order = [new_key if key == old_key else key for key in (stack_order or [])]
    return new_key, new_options, reconcile(new_options, new_order)


def remove_option(options, stack_order, key):
    if key not in options:
        raise NotFoundError(f"Option '{key}' not found")
    new_options = {k: v for k, v in options.items() if k != key}
    return new_options, reconcile(new_options, stack_order)


def set_option(options, key, enabled=None, value=None):
    if key not in options:
        raise NotFoundError(f"Option '{key}' not found")
    entry = dict(options[key])
    if enabled is not None:
        entry['enabled'] = bool(enabled)
    if value is not None:
        entry['value'] = str(value)
    new_options = dict(options)
    new_options[key] = entry
    return new_options


def reorder(options, keys):
    """
    Rebuild an option map in exactly the given key order.

    The only operation that sets the stack order wholesale; keys must be a
    permutation of the map's current keys.
    """
    if not isinstance(keys, list) or not all(isinstance(key, str) for key in keys):
        raise ValidationError('Order must be a list of option keys')
    if len(set(keys)) != len(keys) or set(keys) != set(options):
        raise ValidationError(
            'Order must list every option key exactly once',
            details={'expected': sorted(options), 'received': keys},
        )
    return {key: options[key] for key in keys}, list(keys)
