"""Tomcat buildpack component.

Prepares a Java web application droplet:
- Resolves and downloads a Tomcat distribution into the droplet sandbox
- Patches conf/context.xml and conf/server.xml for the resolved version
- Links the application and shared libraries into Tomcat
"""

__all__ = []
