"""
Unit tests for YAML image definitions.
"""
import pytest

from dockerton.errors import DefinitionError
from dockerton.PARSERS.definition_parser import DefinitionParser


def build(content, context=None, client=None, settings=None):
    parser = DefinitionParser(context=context or {})
    definition = parser.parse_from_string(content)
    return definition, parser.to_builder(definition, client=client, settings=settings)


def test_parse_whalesay(client, settings):
    content = """
    tag: dockerton-whalesay
    output_file: out/Dockerfile
    instructions:
      - from: [docker/whalesay, latest]
      - run: apt-get -y update && apt-get install -y fortunes
      - cmd: /usr/games/fortune -a | cowsay
    """
    definition, builder = build(content, client=client, settings=settings)
    assert definition.tag == "dockerton-whalesay"
    assert definition.output_file == "out/Dockerfile"
    assert builder.tag == "dockerton-whalesay"
    assert builder.commands == [
        "FROM docker/whalesay:latest",
        "RUN apt-get -y update && apt-get install -y fortunes",
        "CMD /usr/games/fortune -a | cowsay",
    ]


def test_every_instruction(client, settings):
    content = """
    instructions:
      - from: {image: python, tag: "3.12-slim"}
      - maintainer: kyle
      - arg: [VERSION, "1.0"]
      - arg: BUILD
      - label: {version: "1.0", vendor: acme}
      - env: [PORT, "8080"]
      - env: {A: "1"}
      - workdir: /app
      - copy: [requirements.txt, app.py, /app/]
      - add: {sources: archive.tar, destination: /opt}
      - run: [pip, install, -r, requirements.txt]
      - expose: [80, 443]
      - volume: /data
      - user: app
      - onbuild: RUN make
      - stopsignal: 15
      - entrypoint: [python]
      - CMD: [app.py]
    """
    _, builder = build(content, client=client, settings=settings)
    assert builder.commands == [
        "FROM python:3.12-slim",
        "MAINTAINER kyle",
        "ARG VERSION=1.0",
        "ARG BUILD",
        'LABEL "version"="1.0" \\\n\t"vendor"="acme"',
        "ENV PORT 8080",
        'ENV A="1"',
        "WORKDIR /app",
        'COPY ["requirements.txt", "app.py", "/app/"]',
        "ADD archive.tar /opt",
        'RUN ["pip", "install", "-r", "requirements.txt"]',
        "EXPOSE 80 443",
        "VOLUME /data",
        "USER app",
        "ONBUILD RUN make",
        "STOPSIGNAL 15",
        'ENTRYPOINT ["python"]',
        'CMD ["app.py"]',
    ]


def test_interpolation(client, settings):
    content = """
    tag: ${TAG}
    instructions:
      - from: [python, "${PY:-3.12}"]
    """
    definition, builder = build(content, context={"TAG": "web"}, client=client, settings=settings)
    assert definition.tag == "web"
    assert builder.commands == ["FROM python:3.12"]


def test_empty_definition(client, settings):
    definition, builder = build("", client=client, settings=settings)
    assert definition.instructions == []
    assert builder.commands == []
    assert builder.tag.startswith("dockerton-")


@pytest.mark.parametrize("content", [
    "tag: ${MISSING}",
    "- just a list",
    "instructions: [run]",
    "instructions:\n  - {run: a, cmd: b}",
    "instructions:\n  - shout: hello",
    "instructions:\n  - copy: only-source",
    "instructions:\n  - copy: [only-source]",
    "instructions:\n  - label: just-a-key",
    "instructions:\n  - from: {img: python}",
    "instructions:\n  - from: [a, b, c]",
    "instructions: [\n",
])
def test_invalid_definitions(content):
    with pytest.raises(DefinitionError):
        DefinitionParser(context={}).parse_from_string(content)


def test_parse_file(tmp_path):
    path = tmp_path / "dockerton.yml"
    path.write_text("tag: from-file\ninstructions:\n  - from: scratch\n")
    definition = DefinitionParser(context={}).parse(str(path))
    assert definition.tag == "from-file"
    assert definition.instructions == [{"from": "scratch"}]
