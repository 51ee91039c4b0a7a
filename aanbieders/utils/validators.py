"""
Validation utilities.
"""

EAN_LENGTH = 18


def validate_ean(code: str) -> bool:
    """
    Validate an 18-digit EAN (energy connection point) code.

    Positions 1..17 are weighted 3,1,3,1,... and summed with a running
    modulo 10; the check digit is (10 - sum) mod 10 and must equal the
    18th digit.

    Any non-digit character makes the code invalid.

    Args:
        code: EAN code as a string

    Returns:
        True if valid, False otherwise
    """
    if not isinstance(code, str) or len(code) != EAN_LENGTH:
        return False

    if not all(char in "0123456789" for char in code):
        return False

    check = 0
    for i in range(1, EAN_LENGTH):
        check = (check + (1 + 2 * (i % 2)) * int(code[i - 1])) % 10

    check = (10 - check) % 10

    return check == int(code[EAN_LENGTH - 1])
