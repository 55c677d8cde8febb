"""Client core for generating AI handwritten newspapers."""
