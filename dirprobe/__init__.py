"""dirprobe - concurrent content-discovery scanner."""
