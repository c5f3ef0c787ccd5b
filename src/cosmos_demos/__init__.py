"""Console demos for the Azure Cosmos DB async SDK."""

__version__ = "0.1.0"
