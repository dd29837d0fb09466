"""Domain layer - documents, queries, collections and journal records."""
