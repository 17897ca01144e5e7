"""Contract-driven HTTP routing and middleware dispatch layer."""
