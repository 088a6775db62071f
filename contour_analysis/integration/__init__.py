"""Collaborators of the detection pipeline: image processing and shape matching."""
