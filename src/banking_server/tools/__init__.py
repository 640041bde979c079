"""Banking tools and the registry that holds them."""
