"""Helpers, configuration and the mixins shared by the containers."""
