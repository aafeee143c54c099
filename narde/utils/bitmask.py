# narde/utils/bitmask.py

def bits_from_indices(indices):
    """Build a mask with one bit set per board point (bit i = point i)."""
    mask = 0
    for i in indices:
        mask |= 1 << int(i)
    return mask


def indices_from_bits(mask: int) -> list[int]:
    """Return the list of set bit positions, lowest first."""
    idxs = []
    mask = int(mask)
    while mask:
        lsb = mask & -mask
        idxs.append(lsb.bit_length() - 1)
        mask &= mask - 1
    return idxs


def set_bit(idx, mask=0):
    """Set the bit of point idx."""
    return mask | (1 << idx)


def clear_bit(idx, mask):
    """Clear the bit of point idx."""
    return mask & ~(1 << idx)


def is_bit_set(idx, mask):
    """Check whether the bit of point idx is set."""
    return (mask & (1 << idx)) != 0


def set_all_bits(start, end):
    return ((1 << (end + 1)) - 1) & ~((1 << start) - 1)


def rotate_right(mask, steps, width):
    """
    Rotate a mask of `width` bits to the right by `steps`.
    Bit i of the result holds bit (i + steps) % width of the input.
    """
    steps %= width
    full = (1 << width) - 1
    mask &= full
    return ((mask >> steps) | (mask << (width - steps))) & full


def count_bits(mask: int) -> int:
    """Count the set bits of a mask."""
    return int(bin(mask).count("1"))
