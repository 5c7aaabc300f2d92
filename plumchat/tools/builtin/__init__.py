"""Built-in PlumChat tools."""
