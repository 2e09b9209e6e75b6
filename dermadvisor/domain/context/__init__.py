# This module assembles the context a conversation starts from

#  +---------------------+
# |  Checkpoint Store   |   (Durable, per thread)
# |---------------------|
# | Message log         |
# | Tool results        |
# | Step counter        |
# +---------------------+

# +---------------------+
# |   Seed context      |   (Built once, new threads only)
# |---------------------|
# | Questionnaire       |
# | Image analysis      |
# | Tool names          |
# +---------------------+

#    \    /
#     \  /
#      \/
# +------------------------------+
# |        Turn history          |   (Replayed on every agent turn)
# |------------------------------|
# | Seed system + opening msg    |
# | Assistant replies            |
# | Tool results                 |
# | Follow-up user messages      |
# +------------------------------+
#         |
#         v
#   [chat model / tool call]
