# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Command-line layout runner.

"""
ideaweaver-layout: seed, lay out and settle a mindmap from JSON Lines.

Examples:
    ideaweaver-layout map.jsonl > positions.jsonl
    cat map.jsonl | ideaweaver-layout --layout radial --snapshot
    ideaweaver-layout map.jsonl --db mindmap.sqlite --config my.yaml -v
"""

import logging
import sys
from typing import List, Optional

from ..config import load_engine_config
from .io import MindmapDocument, read_all, write_document, write_positions
from .layout import layout_names
from .persistence import InMemoryBackend
from .session import MindmapSession
from .store import SqliteMindmapStore

logger = logging.getLogger(__name__)


def run(args) -> int:
    config = load_engine_config(path=args.config)

    if args.input and args.input != '-':
        with open(args.input, encoding='utf-8') as f:
            doc = read_all(f)
    else:
        doc = read_all(sys.stdin)

    store = SqliteMindmapStore(args.db) if args.db else None
    if store is not None:
        for idea in doc.ideas:
            store.add_idea(idea)
        for branch in doc.branches:
            store.create_branch(branch.name, branch.parent_link, branch.color_slot)
    backend = store if store is not None else InMemoryBackend()

    session = MindmapSession(backend, config)
    try:
        session.positions.update(doc.positions)
        session.load(doc.ideas, doc.branches, doc.root_label)
        if args.layout:
            session.apply_layout(args.layout)
        else:
            session.persist_changed_positions()
        outcomes = session.flush()
        failed = [o for o in outcomes if not o.ok]
        if failed:
            logger.error(f"{len(failed)} position writes failed")

        remaining = session.resolver.overlaps(session.positions, session.visible_nodes(),
                                              tolerance=1.0)
        if remaining:
            logger.warning(f"{len(remaining)} overlapping pairs remain after settle")

        if args.snapshot:
            write_document(MindmapDocument(session.root_label, session.ideas,
                                           session.branches, session.positions),
                           sys.stdout)
        else:
            write_positions(session.positions, sys.stdout)
        return 1 if failed else 0
    finally:
        session.close()
        if store is not None:
            store.close()


def main(argv: Optional[List[str]] = None) -> int:
    """CLI interface for the layout engine."""
    import argparse

    parser = argparse.ArgumentParser(description='IdeaWeaver mindmap layout')
    parser.add_argument('input', nargs='?', default='-',
                        help='JSON Lines file (default: stdin)')
    parser.add_argument('--layout', '-l', choices=layout_names(),
                        help='Apply a full layout before settling')
    parser.add_argument('--config', '-c', help='Engine config YAML applied last')
    parser.add_argument('--db', help='Also store records and positions in this SQLite file')
    parser.add_argument('--snapshot', '-s', action='store_true',
                        help='Write every record, not just positions')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(levelname)s: %(message)s', stream=sys.stderr)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
