def parse_line(line: str) -> list[str]:
    """
    Split one CSV record into trimmed fields.

    A double quote toggles quoted mode and is dropped; doubled quotes are not
    an escape. Commas inside quotes stay in the field. Unbalanced quotes
    never raise, the line just ends in whatever mode it was in.
    """
    values: list[str] = []
    current = ''
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == ',' and not in_quotes:
            values.append(current.strip())
            current = ''
        else:
            current += char

    values.append(current.strip())
    return values
