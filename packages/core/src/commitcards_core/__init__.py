"""Post Mercurial commit messages as comments on Trello cards."""
