"""engine: event reducer, controller and run export around the pure core."""
