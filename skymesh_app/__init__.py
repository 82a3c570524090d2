"""SkyMesh application package."""
