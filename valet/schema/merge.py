"""Deep merge of a values document with an overrides document."""

from __future__ import annotations

from valet.schema.values import Value, ValueKind


def deep_merge(base: Value, overrides: Value | None) -> Value:
    """Merge ``overrides`` on top of ``base`` and return a new mapping.

    Keys only in ``base`` keep their original child value. Keys in both
    are merged recursively when both sides are mappings; otherwise the
    override replaces the base value wholesale (sequences are replaced,
    never concatenated). Keys only in ``overrides`` are appended in
    override order. Neither operand is mutated.

    Args:
        base: Base mapping (the values document).
        overrides: Overrides mapping, or None to skip merging.

    Returns:
        The merged mapping, or ``base`` itself when there are no overrides.

    Raises:
        TypeError: If either operand is not a mapping.
    """
    if overrides is None:
        return base
    if base.kind is not ValueKind.MAPPING or overrides.kind is not ValueKind.MAPPING:
        raise TypeError("deep_merge operands must be mappings")

    merged: dict[str, Value] = {}
    override_entries = overrides.entries
    for key, child in base.entries.items():
        if key not in override_entries:
            merged[key] = child
            continue
        replacement = override_entries[key]
        if child.kind is ValueKind.MAPPING and replacement.kind is ValueKind.MAPPING:
            merged[key] = deep_merge(child, replacement)
        else:
            merged[key] = _detach(replacement)

    for key, replacement in override_entries.items():
        if key not in merged:
            merged[key] = _detach(replacement)

    return Value.mapping(merged)


def _detach(value: Value) -> Value:
    """Copy mapping nodes so the result never aliases the overrides' maps.

    Scalars and sequences are immutable and are shared as-is.
    """
    if value.kind is ValueKind.MAPPING:
        return Value.mapping({key: _detach(child) for key, child in value.entries.items()})
    return value
