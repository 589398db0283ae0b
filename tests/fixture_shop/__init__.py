"""A module package scanned for controllers in the tests."""
