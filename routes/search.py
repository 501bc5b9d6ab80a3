def matches_search(row, fields, term):
    """Case-insensitive substring match of ``term`` against any of ``fields``."""
    if not term:
        return True
    term = term.lower()
    return any(row.get(field) and term in str(row[field]).lower() for field in fields)
