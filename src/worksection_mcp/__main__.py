from worksection_mcp.server import run

run()
