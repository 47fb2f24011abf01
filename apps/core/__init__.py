"""Cross-cutting pieces shared by the domain apps."""
