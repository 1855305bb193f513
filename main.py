#This file is for development purposes only

import logging
import sys

from jira_rpc_impl import get_client, get_session, results_truncated
from issue_tracker_interface import QueryError


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    session = get_session(interactive=True)
    if session is None:
        sys.exit("Could not open a Jira session, see the log above.")

    client = get_client()
    query = sys.argv[1] if len(sys.argv) > 1 else "updated >= -1d ORDER BY updated DESC"

    print(f"\nSearching: {query}")
    try:
        issues = client.find_issues_by_query(session, query)
    except QueryError as e:
        sys.exit(f"Search failed: {e}")

    for issue in issues[:5]:
        print(f"- {issue}")
    if results_truncated(issues):
        print("(result set was capped)")

    project = issues[0].project if issues else None
    if project:
        print(f"\nVersions of {project}:")
        for version in client.get_versions(session, project):
            print(f"- {version.name} ({version.id})")

if __name__ == "__main__":
    main()
