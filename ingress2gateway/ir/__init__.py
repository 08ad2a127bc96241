"""Intermediate representation shared by providers and emitters."""
