"""ISR policy, page cache and build planning."""
