#!/usr/bin/env python3
"""
Trend Segmentation - Main Entry Point

Usage:
    python main.py segment --data 600519.SH.csv --output segments.json
    python main.py compare --a 600519.SH.csv --b 000001.SZ.csv
    python main.py tournament --db stock.db --exit-condition 10 --seed 7
    python main.py plot --segments segments.json --output segments.png
"""

if __name__ == "__main__":
    import sys
    from src.cli.main import main
    sys.exit(main())
