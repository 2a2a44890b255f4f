def is_power_of_two(n):
    return n & (n - 1) == 0


def next_power_of_two(n):
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


def get_length(n):
    """Given n (a power of two), finds k such that n == 1 << k."""
    if n <= 0 or not is_power_of_two(n):
        raise ValueError(f"{n} is not a positive power of two")
    return n.bit_length() - 1


def get_two_adicity(modulus):
    n = modulus - 1

    # Count trailing zeros to get two-adicity
    adicity = 0
    while n & 1 == 0:
        adicity += 1
        n >>= 1

    return adicity


def parse_coefficients(text):
    # "1,2,3" -> [1, 2, 3], constant term first
    return [int(c) for c in text.split(",") if c.strip()]
