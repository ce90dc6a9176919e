"""Framework-free session core: state, policies, synchronizer and controller."""
