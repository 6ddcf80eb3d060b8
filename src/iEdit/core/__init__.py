"""Core document model, image math and compositor."""
