from offx_mcp.cli import main

main()
