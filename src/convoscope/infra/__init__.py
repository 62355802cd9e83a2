"""Infrastructure implementations for convoscope."""
