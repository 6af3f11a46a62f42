"""auditvault: incremental, checkpointed export of an organization's audit log."""
