DEFAULTS = {
    # FastAPI application title
    "APP_NAME": "micromacro-backend",
    # Prefix for every router
    "API_PREFIX": "",
    # What to do when all state weights are zero: "error" or "uniform"
    "ZERO_WEIGHT_POLICY": "error",
    # Power-iteration stop criterion (max abs change per component)
    "EQUILIBRIUM_TOLERANCE": 1e-10,
    # Power-iteration cap
    "EQUILIBRIUM_MAX_ITERATIONS": 10_000,
    # Weight given to new state nodes
    "DEFAULT_NODE_WEIGHT": 1.0,
    # Weight given to new edges
    "DEFAULT_EDGE_WEIGHT": 1.0,
    # Start with the three-state example system
    "SEED_DEFAULT_GRAPH": True,
}
