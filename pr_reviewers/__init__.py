"""PR Reviewers: pull request tracking with automatic reviewer assignment."""
