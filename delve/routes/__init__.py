"""HTTP blueprints for dungeon generation, seeds and path queries."""
