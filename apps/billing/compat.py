"""
Legacy request spelling for the billing trigger.

Older clients post camelCase keys. They are mapped onto the canonical
snake_case names before validation; canonical keys win when both appear.
"""

LEGACY_BILLING_FIELDS = {
    'periodStartDate': 'period_start_date',
    'periodEndDate': 'period_end_date',
    'ratePerLiter': 'rate_per_liter',
}


def translate_legacy_billing_payload(data) -> dict:
    """Return a plain dict with legacy keys renamed to canonical ones."""
    payload = {key: data[key] for key in data.keys()}

    for legacy, canonical in LEGACY_BILLING_FIELDS.items():
        if legacy not in payload:
            continue
        value = payload.pop(legacy)
        payload.setdefault(canonical, value)

    return payload
