"""Entry point for ``python -m realmsmith <command>``.

Commands:
    types             list registered object types and category stats
    providers         show effective provider configuration and availability
    test-providers    send a tiny prompt to every live provider
    generate          generate one object against a campaign world file
    serve             start the FastAPI backend with uvicorn
"""
from realmsmith.cli import main

if __name__ == "__main__":
    main()
