"""Entry point for ``python -m vineyard <command>``.

Commands:
    generate        – generate a (validated) town and print it as JSON
    validate        – run the validators over a town JSON file
    survey          – generate a run of seeds and report the pass rate
    check-templates – load and validate a template pack
"""
from vineyard.cli import main

if __name__ == "__main__":
    main()
