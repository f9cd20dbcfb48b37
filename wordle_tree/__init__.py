"""Decision-tree search for Wordle strategies."""
