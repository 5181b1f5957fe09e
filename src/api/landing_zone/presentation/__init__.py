"""HTTP and command-line surfaces for the landing zone context."""
