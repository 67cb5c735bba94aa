pytest_plugins = ["jdx.testing"]
