"""Number pairs: decomposing a number into two addends with beads on a wire."""
