"""User accounts with profile images and online status."""
