"""Field report processing backend."""
