"""
Most basic example, the traditional "Hello World".
"""
from dockerton import Dockerton


def main():
    docker = Dockerton("dockerton-example").from_("hello-world")

    docker.serialize()
    docker.build_image()
    docker.run_image()


if __name__ == '__main__':
    main()
