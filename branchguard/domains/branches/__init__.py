"""Branches domain: restrict admin users to one branch of the page tree.

Build one ``BranchAccessEvaluator`` per request (see ``api.deps``) and hand
it to the hooks in ``branchguard.hooks``. The ``BranchConfig`` it reads is
loaded once at startup by ``load_branch_config``.
"""
