"""Branch-scoped access control for tree-structured CMS admins."""
