"""Test doubles for farewell_desk."""
