"""CalcHub: find, favorite, and revisit calculators from the terminal."""
