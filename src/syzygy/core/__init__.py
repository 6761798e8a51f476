"""Simulation core: state, gravity, integration, alignment and prediction."""
