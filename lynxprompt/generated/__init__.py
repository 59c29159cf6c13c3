# Prisma clients are generated here, one package per schema:
#   prisma generate --schema prisma/schema-<name>.prisma
