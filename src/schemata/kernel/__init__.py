"""Engine kernel: schema node, parse context, registry and reflection."""
