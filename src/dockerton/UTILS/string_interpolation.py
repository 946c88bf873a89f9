"""
Interpolation of environment variables in image definition files.
"""
import re
from typing import Dict

from ..errors import DefinitionError

# ${VAR}, ${VAR:-default} or ${VAR:+alternate}
_PATTERN = re.compile(r'\$\{([^}:]+)(?::(-|\+)([^}]*))?\}')


class EnvironmentInterpolator:
    """
    Substitutes ${VAR}, ${VAR:-default} and ${VAR:+value} references in a
    definition before it is parsed as YAML.
    """
    @staticmethod
    def interpolate(template: str, context: Dict[str, str]) -> str:
        """
        Replaces every variable reference in the definition text.

        :param template: Raw definition text.
        :param context: The environment variables to substitute.
        :return: The definition text with references replaced.
        :raises DefinitionError: If a plain ${VAR} is not set in the context.
        """
        missing = []

        def replace(match):
            name, modifier, alternate = match.groups()
            value = context.get(name)

            if modifier == '-':
                return value if value else alternate
            if modifier == '+':
                return alternate if value else ''
            if value is None:
                missing.append(name)
                return match.group(0)
            return value

        result = _PATTERN.sub(replace, template)
        if missing:
            raise DefinitionError(
                "Variable(s) not set: {}".format(", ".join(sorted(set(missing)))))
        return result
