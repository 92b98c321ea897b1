"""Update modules run by the forkupdate orchestrator."""
