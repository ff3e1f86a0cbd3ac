#!/usr/bin/env python3
"""Entry point for BucketList."""

from bucketlist.main import main

if __name__ == "__main__":
    main()
