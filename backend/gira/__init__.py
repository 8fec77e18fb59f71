"""Agendamento de consulentes nas entidades de uma gira."""
