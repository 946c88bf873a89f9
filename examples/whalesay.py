"""
A basic example using the `whalesay` image from the docker tutorial.
"""
from dockerton import Dockerton


def main():
    dockerton = (
        Dockerton("dockerton-whalesay")
        .from_("docker/whalesay", "latest")
        .run("apt-get -y update && apt-get install -y fortunes")
        .cmd("/usr/games/fortune -a | cowsay")
    )

    contents = dockerton.serialize()
    print("---------------------")
    print("Generated Dockerfile:")
    print(contents)
    print("---------------------")

    details = dockerton.build_image()
    print("---------------------")
    print("Image Built:")
    print(details.model_dump_json(by_alias=True, indent=2))
    print("---------------------")

    dockerton.run_image()


if __name__ == '__main__':
    main()
