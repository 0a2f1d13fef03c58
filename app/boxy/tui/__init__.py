"""Interactive terminal view: state machine, list logic, viewport, renderer."""
