"""Domain layer: models, repository contracts and the tracking state machine."""
