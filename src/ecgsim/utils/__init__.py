"""Small utilities shared across ecgsim."""
